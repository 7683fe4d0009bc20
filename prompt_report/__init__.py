"""Prompt Report: sentence extraction reports from documents and a prompt"""
