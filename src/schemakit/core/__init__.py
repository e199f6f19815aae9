"""schemakit core: schema nodes, validation results and exceptions."""
