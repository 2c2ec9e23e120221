"""Domain layer - query classification, listener bookkeeping and schema compilation."""
