"""Compaction module configuration"""

# Prefix of the synthetic system message that carries the rolling summary
COMPRESSED_HISTORY_PREFIX = "Previous conversation context:\n"

# The compression provider leaves text inside this tag untouched, which keeps the
# "User:" / "Assistant:" turn labels intact inside the summary
PROTECT_TAG = "ttc_safe"

ROLE_LABELS = {
    "user": "User",
    "assistant": "Assistant",
}

COMPRESSION_FAILED_WARNING = "Compression failed. Continuing without compression."
