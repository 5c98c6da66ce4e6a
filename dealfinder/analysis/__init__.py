"""Investment metrics, scoring and property filtering."""

from dealfinder.analysis.engine import DealAnalyzer
from dealfinder.analysis.filters import filter_and_sort, matches_filters, sort_properties
from dealfinder.analysis.metrics import compute_metrics, monthly_payment
from dealfinder.analysis.scoring import score_band, score_investment
from dealfinder.analysis.summary import summarize
