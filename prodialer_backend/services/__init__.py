"""Service layer: contact access, report aggregation and export encoders."""
