"""
Keyword-based transaction categorization.

The category table is an ordered list of (category, keywords) pairs.
Categories are tried in the order listed and the first category with a
keyword contained in the description wins, so the order of the table
decides between overlapping keywords. Keywords are lower case.
"""

from typing import List, Tuple

UNCLASSIFIED = "Unclassified"

CATEGORY_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("3KM", ("3km",)),
    (
        "Auto",
        (
            "chevron", "shell", "mobil", "gas station", "auto", "car wash",
            "oil change", "tire", "mechanic", "valero", "exxon", "bp ",
            "citgo", "arco", "fastrak", "bridge toll",
        ),
    ),
    ("Bank Fees", ("fee", "charge", "overdraft", "annual membership fee", "atm fee")),
    ("Cash", ("cash", "atm withdrawal")),
    ("Checks", ("check",)),
    ("Child Care and Camps", ("child care", "daycare", "camp", "babysit")),
    (
        "Deposits",
        (
            "deposit", "payroll", "salary", "wages", "income",
            "direct deposit", "tripleseat",
        ),
    ),
    ("Donations", ("donation", "charity", "church", "goodwill")),
    (
        "Education",
        ("school", "university", "college", "tuition", "education", "srjc"),
    ),
    (
        "Entertainment",
        (
            "movie", "theater", "concert", "entertainment", "netflix", "hulu",
            "spotify", "paramount",
        ),
    ),
    ("Fines and Tickets", ("fine", "ticket", "violation", "penalty")),
    ("Girl Scouts", ("girl scout",)),
    ("Gifts", ("gift",)),
    (
        "Groceries",
        (
            "safeway", "grocery", "whole foods", "trader joe", "costco",
            "walmart", "target", "oliver", "wholefds",
        ),
    ),
    (
        "Hardware",
        ("home depot", "lowes", "hardware", "ace hardware", "mission ace"),
    ),
    (
        "Health and Beauty",
        ("cvs", "walgreens", "pharmacy", "cosmetic", "salon", "spa", "beauty"),
    ),
    (
        "Health Supplements",
        ("vitamin", "supplement", "gnc", "health store", "ryze"),
    ),
    ("Household", ("household", "cleaning", "laundry", "detergent")),
    ("Insurance", ("insurance", "protective life")),
    ("Interest Paid", ("interest", "finance charge", "purchase interest charge")),
    ("IRS", ("irs", "tax payment", "internal revenue")),
    (
        "Medical and Dental Expenses",
        ("doctor", "hospital", "medical", "dental", "dentist", "physician"),
    ),
    ("Mortgage", ("mortgage", "us bank home mtg")),
    (
        "Office Technology",
        ("microsoft", "adobe", "zoom", "google", "apple.com", "linkedin"),
    ),
    (
        "Office Supplies, Memberships & Subscriptions",
        ("office", "supplies", "membership", "subscription", "staples"),
    ),
    ("Parking", ("parking", "meter", "garage")),
    ("Pets", ("pet", "vet", "veterinary", "petco", "pet food")),
    ("Postage", ("usps", "fedex", "ups", "postage", "shipping")),
    (
        "Restaurants",
        (
            "restaurant", "cafe", "bistro", "grill", "pizza", "burger", "taco",
            "chinese", "italian", "sushi", "starbucks", "dunkin", "lepe",
            "taqueria", "ozzies", "everest indian", "tatte bakery", "kelly",
            "salt and stone", "mombos pizza",
        ),
    ),
    ("Solar Lease", ("solar", "spruce power")),
    ("Storage", ("storage", "storagepro")),
    ("Subscriptions", ("subscription", "monthly", "annual")),
    ("Tax Return Preparation", ("tax prep", "h&r block", "turbotax")),
    (
        "Transfers",
        ("transfer", "payment thank you", "ach electronic credit", "mobile deposit"),
    ),
    (
        "Travel",
        (
            "hotel", "airline", "flight", "rental car", "uber", "lyft", "taxi",
            "hilton", "marriott", "travel", "logan expr", "commuter rail", "mbta",
        ),
    ),
    (UNCLASSIFIED, ()),
    (
        "Utilities",
        (
            "electric", "gas", "water", "phone", "internet", "cable",
            "comcast", "pgande", "att",
        ),
    ),
    (
        "Web Hosting",
        ("godaddy", "aws", "amazon web services", "google cloud", "hosting"),
    ),
    (
        "Wine, Beer, Spirits",
        ("wine", "beer", "spirits", "liquor", "alcohol", "totalwine"),
    ),
)

CATEGORIES: List[str] = [category for category, _ in CATEGORY_KEYWORDS]

# Tax-deductible categories summarized separately in the report
BUSINESS_CATEGORIES: List[str] = [
    "Office Technology",
    "Office Supplies, Memberships & Subscriptions",
    "Web Hosting",
    "3KM",
]

TRANSFERS = "Transfers"
INTEREST_PAID = "Interest Paid"


def categorize(description: str) -> str:
    """
    Return the category for a transaction description.

    Args:
        description: Transaction description text

    Returns:
        str: The first category in table order with a matching keyword,
        or "Unclassified"
    """
    lowered = description.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        for keyword in keywords:
            if keyword in lowered:
                return category
    return UNCLASSIFIED
