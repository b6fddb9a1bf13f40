"""Global pytest configuration."""

import os

# Keep tests offline regardless of the developer's environment
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_ANON_KEY"] = ""
os.environ.setdefault("OPENAI_API_KEY", "")
