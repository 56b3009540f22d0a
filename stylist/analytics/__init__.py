"""In-memory request analytics and the persistence-failure hook."""
