"""Remote service integrations (Trello boards, GitHub pull requests)."""
