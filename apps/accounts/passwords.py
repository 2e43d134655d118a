import re

SPECIAL_CHARACTERS = "!@#$%^&*"


def validate_password(password: str) -> dict:
    password = password or ""
    checks = {
        "min_length": len(password) >= 8,
        "has_upper_case": bool(re.search(r"[A-Z]", password)),
        "has_number": bool(re.search(r"\d", password)),
        "has_special_char": any(ch in SPECIAL_CHARACTERS for ch in password),
    }
    return {"is_valid": all(checks.values()), **checks}


def password_strength(password: str) -> str:
    result = validate_password(password)
    score = sum(1 for key, passed in result.items() if key != "is_valid" and passed)
    if score >= 4:
        return "strong"
    if score >= 2:
        return "medium"
    return "weak"


STRENGTH_LABELS = {
    "weak": "lemah",
    "medium": "sedang",
    "strong": "kuat",
}
