"""Resolution semantics for claim stacking and precedence."""

# Rule names for reference in tests and audit
RULE_BLOCK_DOMINATES = "block: a blocked override wins over every other candidate"
RULE_REPLACEMENT_OVER_BASE = "replacement: a replacement override wins over non-override candidates"
RULE_MARKET_OVER_GLOBAL = "market: country-specific origin wins over worldwide origin"
RULE_LEVEL_SPECIFICITY = "level: product > ingredient > brand"
RULE_FIRST_SEEN = "stability: first candidate seen wins remaining ties"

PRECEDENCE_LADDER = (
    RULE_BLOCK_DOMINATES,
    RULE_REPLACEMENT_OVER_BASE,
    RULE_MARKET_OVER_GLOBAL,
    RULE_LEVEL_SPECIFICITY,
    RULE_FIRST_SEEN,
)
