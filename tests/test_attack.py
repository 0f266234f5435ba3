"""End-to-end key recovery on the toy and regression presets."""

import numpy as np
import pytest

from isogeny_cracker.analysis.validation import AttackValidator
from isogeny_cracker.attack.orchestrator import AttackOrchestrator, run_attack
from isogeny_cracker.attack.protocol import keygen, random_secret
from isogeny_cracker.core.torsion import torsion_basis
from isogeny_cracker.errors import SearchExhausted
from isogeny_cracker.utils.types import AttackConfig


@pytest.fixture(scope="module")
def toy_orchestrator(toy_ctx):
    return AttackOrchestrator(toy_ctx)


class TestToyAttack:
    @pytest.mark.parametrize("secret", range(8))
    def test_recovers_every_secret(self, toy_ctx, toy_orchestrator, secret):
        pk = keygen(toy_ctx, secret)
        result = toy_orchestrator.attack(pk)
        assert result.secret == secret
        assert result.curve_match
        assert result.parameters is not None
        assert result.parameters.degree == 65

    def test_identity_images_do_not_reach_base_curve(self, toy_ctx, toy_orchestrator):
        pk = keygen(toy_ctx, 3)
        R1, R2 = torsion_basis(pk.curve, 2, 3)
        endo = toy_orchestrator.parameters[0].endomorphism
        assert toy_orchestrator._extract(pk, endo, R1, R2, R1, R2) == (None, False)

    def test_parameters_cached(self, toy_orchestrator):
        assert toy_orchestrator.parameters is toy_orchestrator.parameters

    def test_run_attack_wrapper(self, toy_ctx):
        pk = keygen(toy_ctx, 6)
        result = run_attack(toy_ctx, pk)
        assert AttackValidator(toy_ctx, 6, pk, result).key_match()

    def test_no_candidates(self, toy_ctx):
        orchestrator = AttackOrchestrator(toy_ctx, AttackConfig(max_middle_exponent=-1))
        with pytest.raises(SearchExhausted):
            orchestrator.attack(keygen(toy_ctx, 1))


class TestRegressionAttack:
    def test_random_secrets(self, regression_ctx):
        orchestrator = AttackOrchestrator(regression_ctx)
        rng = np.random.default_rng(2024)
        for _ in range(2):
            secret = random_secret(regression_ctx, rng)
            pk = keygen(regression_ctx, secret)
            result = orchestrator.attack(pk)
            validator = AttackValidator(regression_ctx, secret, pk, result)
            assert validator.curve_match()
            assert validator.secret_match()

    def test_middle_graph_search(self, regression_ctx):
        orchestrator = AttackOrchestrator(regression_ctx, AttackConfig(min_middle_exponent=1))
        pk = keygen(regression_ctx, 4)
        result = orchestrator.attack(pk)
        assert result.secret == 4
        assert result.parameters.middle_exponent == 1
        assert result.paths_tried >= 1
