"""
WaterModel - speed of sound and absorption in seawater.
"""


class WaterModel:
    """
    Water model for planners that know the water mass instead of the sound speed.

    Uses empirical formulas for seawater.
    """

    PH = 8.0

    @staticmethod
    def calculate_sound_speed(T: float, S: float, z: float) -> float:
        """
        Calculates sound speed in water using Mackenzie (1981) formula.

        Valid for T 2-30 °C, S 25-40 PSU and depths down to 8000 m.

        Args:
            T: Temperature, °C
            S: Salinity, PSU
            z: Transducer depth, m

        Returns:
            Sound speed, m/s
        """
        c = 1448.96 + 4.591*T - 5.304e-2*T**2 + 2.374e-4*T**3
        c += 1.340*(S - 35) + 1.630e-2*z + 1.675e-7*z**2
        c += -1.025e-2*T*(S - 35) - 7.139e-13*T*z**3

        return c

    @staticmethod
    def calculate_absorption(f: float, c: float, S: float, T: float, z: float) -> float:
        """
        Calculates sound absorption in seawater.

        Francois-Garrison: boric acid and magnesium sulphate relaxation
        plus pure water attenuation, at pH 8.

        Args:
            f: Frequency, Hz
            c: Sound speed, m/s
            S: Salinity, ppt
            T: Temperature, °C
            z: Transducer depth, m

        Returns:
            Absorption, dB/m (0 unless frequency, sound speed and salinity are positive)
        """
        if c <= 0 or S <= 0 or f <= 0:
            return 0.0

        f_kHz = f / 1000.0

        # Boric acid
        A1 = 8.68 / c * 10.0**(0.78*WaterModel.PH - 5.0)
        f1 = 2.8 * (S / 35.0)**0.5 * 10.0**(4.0 - 1245.0 / (273.0 + T))
        P1 = 1.0

        # Magnesium sulphate
        A2 = 21.44 * S / c * (1.0 + 0.025*T)
        f2 = 8.17 * 10.0**(8.0 - 1990.0 / (273.0 + T)) / (1.0 + 0.0018*(S - 35.0))
        P2 = 1.0 - 1.37e-4*z + 6.2e-9*z**2

        # Pure water
        A3 = 4.93e-4 - 2.59e-5*T + 9.11e-7*T**2
        P3 = 1.0 - 3.83e-5*z + 4.9e-10*z**2

        # dB/km to dB/m
        alpha = A1 * P1 * f1 * f_kHz**2 / (f_kHz**2 + f1**2) / 1000.0
        alpha += A2 * P2 * f2 * f_kHz**2 / (f_kHz**2 + f2**2) / 1000.0
        alpha += A3 * P3 * f_kHz**2 / 1000.0

        return alpha
