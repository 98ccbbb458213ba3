SEED = 42

POPULATION_SIZE = 50
GENOME_LENGTH = 80
GENE_DURATION = 10
MUTATION_RATE = 0.05
MUTATION_STRENGTH = 0.3
MAX_GENERATIONS = 200
COURSE_LENGTH = 1000

BASE_SPEED = 4.2
STRIDE_SCALE = 0.6
GRAVITY = 0.6
JUMP_VELOCITY_MIN = 6.4
JUMP_VELOCITY_MAX = 12.5
JUMP_THRESHOLD = 0.52
JUMP_REARM_RATIO = 0.6
JUMP_COOLDOWN_FRAMES = 18
GROUND_EPSILON = 0.01

RUNNER_RADIUS = 8
RUNNER_START_X = 40.0
GROUND_MARGIN = 36
CANVAS_HEIGHT = 360

OBSTACLE_MODES = ("random", "manual")
DEFAULT_OBSTACLE_MODE = "random"
DEFAULT_MANUAL_OBSTACLES = "150:1.2, 320:1.8, 520:1.5, 740:2.0"
MANUAL_OBSTACLE_WIDTH = 14
MANUAL_DEFAULT_MULTIPLIER = 1.5
MANUAL_MIN_MULTIPLIER = 1.0
MANUAL_HEIGHT_BOOST_PER_LEVEL = 0.15
HURDLE_MIN_GAP_FACTOR_BASE = 1.6
MAX_HURDLE_HEIGHT_MULTIPLIER = 5.0
BASE_RANDOM_HURDLE_DIVISOR = 160

ELITE_RATIO = 0.1
MIN_ELITE_COUNT = 2

# (min, max) bounds applied to user supplied settings.
POPULATION_SIZE_RANGE = (10, 200)
MAX_GENERATIONS_RANGE = (10, 1000)
COURSE_LENGTH_RANGE = (400, 3000)
MUTATION_RATE_RANGE = (0.0, 1.0)
SPEED_MULTIPLIER_RANGE = (1.0, 20.0)

SESSION_ADJECTIVES = ["Swift", "Crimson", "Nimble", "Solar", "Iron", "Azure", "Wild", "Quiet"]
SESSION_NOUNS = ["Hurdler", "Sprinter", "Stride", "Leap", "Dash", "Relay", "Track", "Vault"]
