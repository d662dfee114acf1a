"""ERD Toolkit: SQL to entity-relationship diagrams and back."""
