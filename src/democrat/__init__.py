"""Democrat: Bundestag Drucksache sync and AI enrichment pipeline."""
