"""Agent tools, line editing, environment setup, naming helpers and summarizers."""