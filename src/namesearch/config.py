import os

# Fuzzy index tuning (lower threshold -> stricter, higher -> looser)
INDEX_THRESHOLD: float = 0.45
INDEX_DISTANCE: int = 100
IGNORE_LOCATION: bool = True

# Cascade acceptance bounds
FUZZY_ACCEPT: float = 0.55        # stage 3: keep index hits with score <= this
SIMILARITY_ACCEPT: float = 0.62   # stage 4: keep rows with similarity >= this

# Suggestions must score strictly above this
SUGGEST_MIN: float = 0.4

# Devanagari block, the two dandas and the three dash variants survive normalization
SCRIPT_RANGE: tuple[str, str] = ("ऀ", "ॿ")
EXTRA_CHARS: str = "।॥-–—"

# Seed garble fixes applied as the last normalization step; pass fixes=() to disable.
SEED_FIXES: tuple[tuple[str, str], ...] = (
    ("पममबरई", "प्रेमबाई"),
    ("पममबरै", "प्रेमबाई"),
    ("पममबई", "प्रेमबाई"),
    ("जयररम", "जयराम"),
)

# Page text is split into rows on newlines, double spaces and dandas
LINE_SPLIT: str = r"\r\n|\n|  |।|॥"

# Where taught mappings live: "json:///path", "sqlite:///path" or "memory://"
MAPPINGS_DSN: str = os.environ.get(
    "NAMESEARCH_MAPPINGS",
    "json:///" + os.path.join(os.path.expanduser("~"), ".namesearch", "mappings.json"),
)
