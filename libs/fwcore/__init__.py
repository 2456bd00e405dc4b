"""Shared configuration and logging for Fretwise libraries and pods."""
