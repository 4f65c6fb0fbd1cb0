"""Municipality clustering - similarity graphs and k-means over category weights."""

__version__ = "0.1.0"

from muni_clusters.errors import DataFormatError as DataFormatError
from muni_clusters.errors import EmptyInput as EmptyInput
from muni_clusters.errors import InvalidClusterCount as InvalidClusterCount
from muni_clusters.errors import MuniClusterError as MuniClusterError
from muni_clusters.features import extract_features as extract_features
from muni_clusters.graph import create_graph as create_graph
from muni_clusters.kmeans import KMeans as KMeans
from muni_clusters.kmeans import k_means_clustering as k_means_clustering
from muni_clusters.matching import filter_common_municipalities as filter_common_municipalities
from muni_clusters.models import Dataset as Dataset
from muni_clusters.models import MatchedPair as MatchedPair
from muni_clusters.models import MunicipalityRecord as MunicipalityRecord
from muni_clusters.report import ClusterAssignment as ClusterAssignment
