STORE_CHOICES = ["dir", "rest"]

STORE_HELP_TEXT = (
    "Where reports are stored:\n"
    "  dir   : JSON files under --path/<owner>/ (deleted reports go to trash)\n"
    "  rest  : PostgREST/Supabase table at --url (API key from REPORTSWEEP_API_KEY)\n"
)

ENV_URL = "REPORTSWEEP_URL"
ENV_API_KEY = "REPORTSWEEP_API_KEY"
ENV_OWNER = "REPORTSWEEP_OWNER"

EPILOG_TEXT = """
Examples:
  Dry run - list duplicate groups in a directory store
  %(prog)s --store dir --path ~/reports --owner alice

  Same as above + delete duplicates (with confirmation prompt)
  %(prog)s --store dir --path ~/reports --owner alice --delete

  Widen the duplicate window to 30 minutes, delete without confirmation (for scripts)
  %(prog)s --store dir --path ~/reports --owner alice --tolerance 30m --delete --force

  Clean a Supabase table, 20 deletes per batch, 100ms between batches
  REPORTSWEEP_API_KEY=... %(prog)s --store rest --url https://xyz.supabase.co \\
      --owner 7c1e... --batch-size 20 --pause 100ms --delete
"""
