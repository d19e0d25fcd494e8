"""Decoding of CloudWatch Events and their detail payloads."""