"""Creative export engine: derive size- and language-specific ad bundles from one creative."""
