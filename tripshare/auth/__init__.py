"""Session auth: seeded demo travellers and the route guards that check them."""
