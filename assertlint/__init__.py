"""assertlint: static checks for Go testify assertions."""
