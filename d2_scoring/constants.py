"""Constants for readiness score computation."""

# Sub-score bounds per category
MAX_CATEGORY_SCORE = 100

# Total score scale: weighted 0-100 average stretched onto 0-999
SCORE_SCALE_FACTOR = 9.99
MIN_TOTAL_SCORE = 0
MAX_TOTAL_SCORE = 999

# Weight bounds applied to configured and resolved weights
MIN_WEIGHT = 0.10
MAX_WEIGHT = 0.50

# Stage adjustment magnitude
STAGE_WEIGHT_DELTA = 0.05

# Resolved weights are rounded to strip float noise from the stage deltas
WEIGHT_PRECISION = 4

# Warn when configured weights stray this far from summing to 1.0
WEIGHT_SUM_WARNING_THRESHOLD = 0.05
