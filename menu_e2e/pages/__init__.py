"""Page objects for the menu site."""
