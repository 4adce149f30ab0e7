"""
Credit Score (static)

The Credit screen shows a fixed illustrative profile. No bureau is
queried and nothing here is derived from the ledger.
"""

from khaatakitab.models.credit import CreditFactor, CreditProfile, CreditRating


CREDIT_SCORE = 720
MAX_CREDIT_SCORE = 900

# (minimum score, rating), checked top-down
RATING_BANDS: list[tuple[int, CreditRating]] = [
    (750, CreditRating.EXCELLENT),
    (650, CreditRating.GOOD),
    (550, CreditRating.FAIR),
]

CREDIT_FACTORS = [
    CreditFactor(label="Payment History", score=85, impact="High"),
    CreditFactor(label="Credit Utilization", score=70, impact="High"),
    CreditFactor(label="Credit Age", score=60, impact="Medium"),
    CreditFactor(label="Credit Mix", score=75, impact="Low"),
]

IMPROVEMENT_TIPS = [
    "Pay all bills on time every month",
    "Keep credit utilization below 30%",
    "Avoid opening too many new accounts",
    "Maintain a diverse credit mix",
]


def rate_score(score: int) -> CreditRating:
    for minimum, rating in RATING_BANDS:
        if score >= minimum:
            return rating
    return CreditRating.POOR


def get_credit_profile() -> CreditProfile:
    return CreditProfile(
        score=CREDIT_SCORE,
        max_score=MAX_CREDIT_SCORE,
        rating=rate_score(CREDIT_SCORE),
        factors=[factor.model_copy() for factor in CREDIT_FACTORS],
        tips=list(IMPROVEMENT_TIPS),
    )
