"""Value objects shared by the normalizer, providers and the index facade."""
