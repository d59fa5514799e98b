"""AcWoC Discord bot: leaderboard lookups and moderator utilities."""
