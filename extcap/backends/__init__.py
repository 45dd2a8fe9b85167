"""Ready-made capture backends built on the extcap application."""
