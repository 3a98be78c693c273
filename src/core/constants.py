"""
Plaza Geometry and Default Parameters

Longitudinal layout of every lane (positions are cell indices):

    [0, DIV_START)            free highway, highway lanes only
    DIV_START                 fan-out junction (one-shot routing event)
    (DIV_START, LOCK_START)   lateral changes allowed, no routing logic
    [LOCK_START, MERGE_START) lane-commitment zone, no lateral changes
    BOOTH_X                   booth column (inside the commitment zone)
    [MERGE_START, COLS)       merge zone, vanishing lanes must fan in
"""

# Road geometry [cells]
COLS = 90
DIV_START = 30
LOCK_START = 45
BOOTH_X = 55
MERGE_START = 60

# Returned by the gap query when the lane is clear to the track end
GAP_SENTINEL = 1000

# Lane topology
DEFAULT_L = 3                    # Highway lanes
DEFAULT_B = 6                    # Booth lanes

# Arrival / movement
DEFAULT_LAMBDA = 0.6             # Arrival probability per tick
DEFAULT_ACC = 0.9                # Base forward probability
DEFAULT_P_MIN = 0.1              # Forward probability floor (anti-deadlock)

# Service
DEFAULT_MU = 15                  # Service time [ticks] (mean in exponential mode)
DEFAULT_ETC_RATIO = 0.6          # Share of ETC vehicles

# Lane changing
LC_COOLDOWN = 5                  # Ticks between lane changes
ESCAPE_ACCEPT_PROBABILITY = 0.5  # Lateral escape acceptance

# Adaptive acceleration
DEFAULT_A_MIN = 0.1
DEFAULT_A_MAX = 0.9
DEFAULT_D0 = 5                   # Gap threshold [cells]
DEFAULT_BETA = 1.5               # Sigmoid sensitivity

# Routing
DEFAULT_SIGMA = 1.5              # Booth assignment spread [lanes]
DEFAULT_ALPHA = 2.0              # Merge pressure sensitivity
MERGE_BASE_PROBABILITY = 0.3     # Fan-in acceptance with an empty queue
SCORE_TOLERANCE = 1e-6           # Quota scores closer than this are ties

# Progress output
DEFAULT_LOG_INTERVAL = 600       # [ticks]
