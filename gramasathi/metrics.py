from prometheus_client import Counter

DONATIONS = Counter(
    "gramasathi_donations",
    "Donations recorded against charity campaigns",
    ["category"],
)

DONATION_AMOUNT = Counter(
    "gramasathi_donation_amount",
    "Sum of recorded donation amounts",
    ["category"],
)
