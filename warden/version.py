VERSION = "1.0.0"
USER_AGENT = f"WardenAPI-Python/{VERSION}"
