"""Domain layer: resource model, reconciliation engine and adapter ports."""
