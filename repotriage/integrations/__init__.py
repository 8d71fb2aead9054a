# Platform integrations
