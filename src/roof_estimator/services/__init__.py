"""Services subpackage - settings storage, roles, external APIs and estimate assembly."""
