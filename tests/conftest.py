import os

# keep the suite on the portable path unless a test builds its own probe
os.environ.setdefault("COLOR_JOURNEY_BACKEND", "portable")
