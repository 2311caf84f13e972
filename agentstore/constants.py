"""
Shared offer constants.

Currency codes are lowercase ISO 4217 as accepted by the payment processor.
The first entry of each table is the default used in capability examples.
"""

CURRENCIES = (
    "usd",
    "eur",
    "gbp",
    "jpy",
    "cad",
    "aud",
    "chf",
    "inr",
)

INTERVALS = (
    "day",
    "week",
    "month",
    "year",
)
