import os

# widgets and timers run headless
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
