MIN_SIZE_HELP_TEXT = (
    "Ignore files smaller than this (e.g., 4K, 1MB). Default: 0 (every file)"
)

PREFILTER_HELP_TEXT = (
    "Skip the fast front-chunk pre-hash and compute the full content\n"
    "hash for every candidate file"
)

TRASH_HELP_TEXT = (
    "Move replaced originals to the system trash instead of deleting them.\n"
    "Space is only reclaimed once the trash is emptied."
)

EPILOG_TEXT = """
Examples:
  Replace duplicate files under a backup tree with hardlinks
  %(prog)s -i /srv/backups

  Show what would be linked without touching anything
  %(prog)s -i /srv/backups --dry-run

  Only consider files of 1MB and more, leave the cache directory alone
  %(prog)s -i ~/media -m 1MB -e ~/media/.cache

  Keep replaced originals in the trash for a later check
  %(prog)s -i ~/media --trash

Exit status is 0 when every eligible file was processed, 1 on any failure.
"""
