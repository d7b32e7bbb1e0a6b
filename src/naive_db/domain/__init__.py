"""Domain layer - the record model, its on-disk codecs and predicate rules."""
