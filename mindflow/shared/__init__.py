# Shared error taxonomy, logging and request correlation
