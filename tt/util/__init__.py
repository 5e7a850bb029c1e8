from tt.util.misc import now_ms, round_half_up
