"""Channel Access: adapters for Chatwoot, the Evolution gateway and the n8n webhooks."""
