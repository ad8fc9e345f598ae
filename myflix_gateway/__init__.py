"""myFlix API Gateway"""
