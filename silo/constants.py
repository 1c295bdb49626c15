# Declaration lines are "<delimiter><SPACE><path>"
DECLARATION_SEPARATOR = " "

# Auto-selected delimiters: base characters in strict preference order,
# repeated 1..MAX_DELIMITER_LENGTH times.
BASE_DELIMITER_CHARS = (">", "=", "*", "-")
MAX_DELIMITER_LENGTH = 50

# Permissive rule: everything except these may appear in a delimiter.
NON_DELIMITER_CHARS = frozenset({"\x20", "\x09", "\x0a", "\x0d"})

# Older ASCII rule: punctuation codepoints only (inclusive ranges).
ASCII_PUNCTUATION_RANGES = ((33, 47), (58, 64), (91, 96), (123, 126))

# Text is kept as str; undecodable bytes round-trip via surrogateescape.
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"

EXISTS_POLICIES = ("overwrite", "skip", "rename", "fail")
DEFAULT_EXISTS_POLICY = "overwrite"
