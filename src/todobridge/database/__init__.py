"""Dynamic values, the datastore contract and the generic record repo."""
