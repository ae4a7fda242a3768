from .profiles import DEFAULT_CATEGORY

# Checked in order, first match wins. Accessories come before phones because
# their titles often mention the phone they pair with ("auriculares para
# celular"), and microondas comes before cocina for "horno microondas".
CATEGORY_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("smartwatch", ("smartwatch", "reloj inteligente", "smart watch", "smartband")),
    ("auriculares", ("auricular", "audifono", "audífono", "headphone", "earbud", "headset")),
    ("celular", ("celular", "smartphone", "iphone", "telefono", "teléfono", "movil", "móvil")),
    ("notebook", ("notebook", "laptop", "portatil", "portátil", "macbook", "ultrabook")),
    ("televisor", ("televisor", "television", "televisión", "smart tv", "led tv")),
    ("heladera", ("heladera", "refrigerador", "nevera", "freezer")),
    ("lavarropas", ("lavarropas", "lavasecarropas", "lavadora", "lavarropa")),
    ("aire_acondicionado", ("aire acondicionado", "split", "climatizador")),
    ("microondas", ("microondas",)),
    ("cocina", ("cocina", "anafe", "horno")),
]


def detect_category(query: str) -> str:
    """Map a free-text query to a profile key, ``default`` when nothing matches."""
    text = (query or "").lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category
    return DEFAULT_CATEGORY
