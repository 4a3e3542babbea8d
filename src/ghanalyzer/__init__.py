"""GitHub repository contributor analyzer."""
