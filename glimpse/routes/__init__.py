"""Page routes, one module per screen."""
