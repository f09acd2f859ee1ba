"""Log-line rendering and delivery.

Lines are pre-formatted as "<message> <context json>" and handed to a leveled
sink; the default sink is a structlog logger on top of stdlib logging.
"""
