"""BidForStudy 테스트"""
