# ------------------ Defaults ------------------
DEFAULT_BAUD = 9600
BAUD_RATES = [9600, 19200, 38400, 57600, 115200, 230400]

READ_TIMEOUT_S = 0.5     # serial readline timeout; bounds shutdown latency
TICK_MS = 1000           # simulation / refresh tick
DISPATCH_HZ = 20         # how often queued lines are drained on the UI thread
LINE_QUEUE_SIZE = 1_000  # reader -> dispatch backlog

# ---------------- Data model ------------------
WINDOW_SIZE = 10         # points kept per channel
TABLE_MODE_THRESHOLD = 5 # samples with this many fields go to the table

CHANNELS = ("temperature", "humidity", "tertiary")
SEED_VALUES = {
    "temperature": (22.0, 23.0, 22.5),
    "humidity": (50.0, 52.0, 49.0),
    "tertiary": (400.0, 410.0, 405.0),
}
MISSING_VALUE = 0.0

# per-tick increment while simulating
SIM_DRIFT = {
    "temperature": 0.5,
    "humidity": 0.3,
    "tertiary": 1.0,
}

# ---------------- Files -----------------------
SETTINGS_PATH = "settings.json"
LOG_DIR = "logs"
LOG_FILE = "diagnostics.log"

# ---------------- Plot Options ----------------
LINE_WIDTH = 2
CHANNEL_LABELS = {
    "temperature": ("Temperature", "°C"),
    "humidity": ("Humidity", "%"),
    "tertiary": ("Light / CO₂", ""),
}
LINE_COLORS = [
    (214, 39, 40),   # red
    (31, 119, 180),  # blue
    (44, 160, 44),   # green
]
