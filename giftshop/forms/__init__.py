"""WTForms form classes."""
