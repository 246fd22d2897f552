"""
Centralized defaults for validation runs.

These are operational settings shared by the library, the batch coordinator
and the CLI. Environment variables and CLI arguments override them at runtime.
"""


class ValidationDefaults:
    """
    Centralized operational configuration for DTD validation.

    All values are defaults that can be overridden:
    - xml-dtd-validate schema.dtd doc.xml --workers 8
    - DTD_VALIDATOR_LOG_LEVEL=DEBUG xml-dtd-validate ...
    """

    # Diagnostics
    TEXT_PREVIEW_LENGTH = 20  # Characters of stray text quoted in element-only diagnostics
    USE_PARSER_LINES = True  # Fall back to parser-reported lines for uncorrelated elements

    # Parsing
    HUGE_TREE = False  # Lift libxml2 size/depth limits for very large documents

    # Concurrency
    MAX_WORKERS = 4  # Worker threads/processes for batch and async validation
    EXECUTOR = "thread"  # "thread" or "process"

    # Logging
    LOG_LEVEL = "WARNING"  # CRITICAL, ERROR, WARNING, INFO, DEBUG

    @classmethod
    def to_dict(cls) -> dict:
        """
        Export all defaults as a dictionary.

        Returns:
            Dictionary of all ValidationDefaults class attributes.
        """
        return {
            key: getattr(cls, key)
            for key in dir(cls)
            if not key.startswith('_') and key.isupper()
        }

    @classmethod
    def log_summary(cls, logger=None):
        """
        Log a summary of all operational defaults.

        Args:
            logger: Optional logger instance. If None, prints to stdout.
        """
        config_dict = cls.to_dict()
        summary = "\n".join([f"  {key}: {value}" for key, value in sorted(config_dict.items())])
        message = f"Validation Configuration Defaults:\n{summary}"

        if logger:
            logger.info(message)
        else:
            print(message)
