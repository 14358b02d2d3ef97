"""GitHub API access: REST/GraphQL client, node ID lookups, event payload."""
