"""Issue handlers that keep stored priorities current."""
