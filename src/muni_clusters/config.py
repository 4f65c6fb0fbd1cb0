"""Configuration constants for the municipality clustering pipeline."""

# Categories are numbered 1..10 in both source datasets. Feature vectors are built
# over this fixed range, never over whatever categories a record happens to carry.
CATEGORY_RANGE = range(1, 11)
N_CATEGORIES = len(CATEGORY_RANGE)

DEFAULT_K = 3
K_RANGE = range(2, 8)  # candidate k values for --auto-k

RANDOM_SEED = 42
MAX_ITER = 300  # hard cap on k-means iterations

EDGE_SIMILARITY_THRESHOLD = 0.0  # edge iff cosine similarity > threshold

MATCH_MODES = ("structural", "key")
DEFAULT_MATCH_MODE = "structural"

EDUCATION_DATA_FILE = "educationstats.txt"
POP_GROWTH_DATA_FILE = "popgrowthstats.txt"

EDUCATION_GRAPH_FILE = "education_graph.dot"
POP_GROWTH_GRAPH_FILE = "pop_growth_graph.dot"
EDUCATION_PLOT_FILE = "education_clusters.png"
POP_GROWTH_PLOT_FILE = "pop_growth_clusters.png"

PLOT_SIZE_PX = (800, 600)
PLOT_DPI = 100
PLOT_RANGE = (0.0, 10.0)
CLUSTER_CMAP = "Set2"
