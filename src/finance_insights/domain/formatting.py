def format_category(category: str) -> str:
    """``FOOD_AND_DRINK`` -> ``Food And Drink``."""
    return " ".join(word[:1] + word[1:].lower() for word in category.split("_"))


def capitalize_words(value: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in value.split(" "))


def format_currency(amount: float) -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.0f}"


def format_percent(value: float) -> str:
    return f"{value:.1f}%"


def format_signed_percent(value: float) -> str:
    prefix = "+" if value > 0 else ""
    return f"{prefix}{format_percent(value)}"
