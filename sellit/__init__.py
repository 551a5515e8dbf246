"""SellIt classifieds marketplace backend."""
