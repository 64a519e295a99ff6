"""FreeKi client application shell."""
