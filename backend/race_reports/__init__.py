"""Race results normalization, statistics and reporting."""
